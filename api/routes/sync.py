from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.dependencies import get_controller, get_history
from frontmatter_viewer.sync import HostHistory, SyncController

router = APIRouter(prefix="/sync", tags=["sync"])


class NavigateRequest(BaseModel):
    url: str
    replace: bool = False


def _state_payload(controller: SyncController) -> dict:
    state = controller.state
    return {
        "phase": state.phase.value,
        "visible": state.visible,
        "address": state.address.combined if state.address else None,
        "metadata": state.block.to_dict() if state.block else None,
    }


@router.get("/state")
async def get_state(controller: SyncController = Depends(get_controller)):
    return _state_payload(controller)


# Navigation handlers must run on the event loop: the controller schedules
# its fetch tasks there.
@router.post("/navigate")
async def navigate(
    payload: NavigateRequest,
    history: HostHistory = Depends(get_history),
    controller: SyncController = Depends(get_controller),
):
    if payload.replace:
        history.replace_state(payload.url)
    else:
        history.push_state(payload.url)
    return _state_payload(controller)


@router.post("/back")
async def back(history: HostHistory = Depends(get_history), controller: SyncController = Depends(get_controller)):
    history.back()
    return _state_payload(controller)


@router.post("/forward")
async def forward(history: HostHistory = Depends(get_history), controller: SyncController = Depends(get_controller)):
    history.forward()
    return _state_payload(controller)
