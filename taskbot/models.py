"""
Pydantic v2 data models for taskbot.

Dialogue states are frozen models tagged by ``kind``; ``DialogueState`` is the
discriminated union of all of them. Each variant carries exactly the form
fields collected so far, so a state can never hold a field it has not reached.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _State(BaseModel):
    model_config = ConfigDict(frozen=True)


class ListOptions(_State):
    kind: Literal["list_options"] = "list_options"


class ChoseOption(_State):
    kind: Literal["chose_option"] = "chose_option"
    option: str


class AllTasks(_State):
    kind: Literal["all_tasks"] = "all_tasks"


class TodaysTasks(_State):
    kind: Literal["todays_tasks"] = "todays_tasks"


class AddTask(_State):
    kind: Literal["add_task"] = "add_task"


class ReceiveTask(_State):
    kind: Literal["receive_task"] = "receive_task"
    task: str


class ReceiveTaskDeadline(_State):
    kind: Literal["receive_task_deadline"] = "receive_task_deadline"
    task: str
    deadline: str


class ReceiveTaskReminder(_State):
    kind: Literal["receive_task_reminder"] = "receive_task_reminder"
    task: str
    deadline: str
    reminder: str


DialogueState = Annotated[
    Union[
        ListOptions,
        ChoseOption,
        AllTasks,
        TodaysTasks,
        AddTask,
        ReceiveTask,
        ReceiveTaskDeadline,
        ReceiveTaskReminder,
    ],
    Field(discriminator="kind"),
]


class TaskRecord(BaseModel):
    """A completed form. ``id`` is assigned by the store on insert."""

    model_config = ConfigDict(frozen=True)

    task: str = Field(min_length=1)
    deadline: str
    reminder: str
    id: Optional[int] = None
