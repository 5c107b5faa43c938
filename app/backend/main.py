from __future__ import annotations

import asyncio
from typing import Literal, Optional

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from spatial_core.enums import LayoutPattern, UnknownPatternError

from .engine import InMemorySceneEngine, orbit_from_fields


app = FastAPI(title="Spatial Layout API", version="0.1.0")

# Allow local dev frontends
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

engine = InMemorySceneEngine()


class ExpandRequest(BaseModel):
    id: str


class TriggerRequest(BaseModel):
    azimuth: Optional[float] = None
    polar: Optional[float] = None
    radius: Optional[float] = None
    autoplay: bool = True


class ControlRequest(BaseModel):
    cmd: Literal["step", "cancel", "pause", "reset"]
    dt: float = 1.0 / 60.0


@app.get("/layout/tree")
async def get_tree_layout():
    return JSONResponse(jsonable_encoder(engine.tree_layout()))


@app.post("/layout/expand")
async def post_expand(body: ExpandRequest):
    try:
        layout = await engine.toggle(body.id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown category: {body.id}")
    return JSONResponse(jsonable_encoder(layout))


@app.get("/layout/items")
async def get_item_layout(pattern: str = LayoutPattern.CONSTELLATION.value, radius: Optional[float] = None, seed: Optional[int] = None):
    try:
        return JSONResponse(jsonable_encoder(engine.item_layout(pattern, radius, seed)))
    except (UnknownPatternError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.get("/camera/state")
async def get_camera_state():
    return JSONResponse(jsonable_encoder(engine.state()))


@app.post("/camera/trigger")
async def post_trigger(body: TriggerRequest):
    target = None
    if body.azimuth is not None or body.polar is not None or body.radius is not None:
        fallback = engine.choreographer.default_target(engine.controls.get_distance())
        try:
            target = orbit_from_fields(body.azimuth, body.polar, body.radius, fallback)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
    started = await engine.trigger(target, autoplay=body.autoplay)
    return {"ok": True, "started": started, "state": jsonable_encoder(engine.state())}


@app.post("/camera/control")
async def post_control(body: ControlRequest):
    if body.cmd == "step":
        st = await engine.tick(body.dt)
        return {"ok": True, "done": engine.is_done(), "state": jsonable_encoder(st)}
    if body.cmd == "cancel":
        await engine.cancel()
        return {"ok": True}
    if body.cmd == "pause":
        await engine.pause()
        return {"ok": True}
    if body.cmd == "reset":
        await engine.reset()
        return {"ok": True}
    return {"ok": False}


@app.websocket("/camera/stream")
async def ws_stream(ws: WebSocket):
    await ws.accept()

    # Send initial layout
    await ws.send_json({
        "type": "init",
        "layout": jsonable_encoder(engine.tree_layout()),
    })

    q = engine.subscribe()
    try:
        # Immediately push current camera state to client
        await ws.send_json({"type": "camera", **jsonable_encoder(engine.state())})

        while True:
            try:
                st = await q.get()
            except asyncio.CancelledError:
                break

            await ws.send_json({"type": "camera", **jsonable_encoder(st)})

            if engine.is_done():
                await ws.send_json({"type": "done", "reason": "idle"})
    except WebSocketDisconnect:
        pass
    finally:
        engine.unsubscribe(q)


@app.get("/")
async def root():
    return {"service": "spatial-layout", "status": "ok"}
