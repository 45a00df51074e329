from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ..schemas import FilterPayload, InputPayload, SubmitPayload, TaskListState
from ..store import TaskListStore
from ..utils import state_envelope

router = APIRouter(
    prefix="/api/v1/tasks",
    tags=["tasks"],
)

_NOT_FOUND = {404: {"description": "Task not found"}}


def get_store(request: Request) -> TaskListStore:
    """
    Dependency returning the store owned by the running application.
    """
    return request.app.state.store


def _state(store: TaskListStore) -> TaskListState:
    return TaskListState(**state_envelope(store))


def _require(applied: bool) -> None:
    if not applied:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=TaskListState,
    summary="Get Task List",
    description="Return the tasks selected by the current filter together with the form state.",
)
def get_tasks(store: TaskListStore = Depends(get_store)) -> TaskListState:
    """
    Current view of the task list.
    """
    return _state(store)


# PUBLIC_INTERFACE
@router.put(
    "/input",
    response_model=TaskListState,
    summary="Set Pending Input",
    description="Replace the contents of the shared add/update input. Nothing is persisted.",
)
def set_input(payload: InputPayload, store: TaskListStore = Depends(get_store)) -> TaskListState:
    store.set_pending_input(payload.text)
    return _state(store)


# PUBLIC_INTERFACE
@router.post(
    "/submit",
    response_model=TaskListState,
    summary="Add or Update Task",
    description=(
        "Add a new task, or replace the text of the task being edited.\n\n"
        "If text is omitted the pending input is used. Blank text is ignored and "
        "the unchanged state is returned."
    ),
)
def submit_task(payload: SubmitPayload, store: TaskListStore = Depends(get_store)) -> TaskListState:
    store.submit(payload.text)
    return _state(store)


# PUBLIC_INTERFACE
@router.post(
    "/{index}/edit",
    response_model=TaskListState,
    summary="Begin Edit",
    description="Load a task's text into the input and mark it as being edited.",
    responses=_NOT_FOUND,
)
def begin_edit(index: int, store: TaskListStore = Depends(get_store)) -> TaskListState:
    _require(store.begin_edit(index))
    return _state(store)


# PUBLIC_INTERFACE
@router.post(
    "/{index}/toggle",
    response_model=TaskListState,
    summary="Toggle Completion",
    description="Flip the completed flag of a task.",
    responses=_NOT_FOUND,
)
def toggle_task(index: int, store: TaskListStore = Depends(get_store)) -> TaskListState:
    _require(store.toggle_complete(index))
    return _state(store)


# PUBLIC_INTERFACE
@router.delete(
    "/{index}",
    response_model=TaskListState,
    summary="Delete Task",
    description="Delete a task. Any edit in progress is discarded and the input is cleared.",
    responses=_NOT_FOUND,
)
def delete_task(index: int, store: TaskListStore = Depends(get_store)) -> TaskListState:
    _require(store.delete(index))
    return _state(store)


# PUBLIC_INTERFACE
@router.put(
    "/filter",
    response_model=TaskListState,
    summary="Set Filter",
    description="Select which tasks are shown: all, active or completed.",
)
def set_filter(payload: FilterPayload, store: TaskListStore = Depends(get_store)) -> TaskListState:
    store.set_filter(payload.filter)
    return _state(store)
