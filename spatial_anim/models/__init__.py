from .events import (
    LayoutDeclared,
    TransitionStarted,
    CameraFrame,
    TransitionFinished,
    TransitionCancelled,
    RunMetadata,
    SceneStep,
)
from .state import LayoutSnapshot
