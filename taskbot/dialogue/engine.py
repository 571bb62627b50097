"""
Dialogue engine for the task form.

``transition`` is a pure function: it takes the current state of one
conversation and the text of one inbound message (``None`` for stickers,
photos and other non-text messages) and returns the next state, the replies
to send in order, and the task record to persist, if any. It performs no I/O.

A message without text never advances the form; the user is simply asked
again.
"""

from dataclasses import dataclass

from ..constants import (
    ADD_TASK_LINES,
    ALL_TASKS_ACK,
    CMD_ADD_TASK,
    CMD_ALL_TASKS,
    CMD_TODAYS_TASKS,
    INVALID_OPTION,
    MENU_LINES,
    TASK_RECEIVED,
    TEXT_REQUIRED,
    TODAYS_TASKS_ACK,
)
from ..models import (
    AddTask,
    AllTasks,
    ChoseOption,
    DialogueState,
    ListOptions,
    ReceiveTask,
    ReceiveTaskDeadline,
    ReceiveTaskReminder,
    TaskRecord,
    TodaysTasks,
)

_COMMANDS = {
    CMD_ALL_TASKS: AllTasks,
    CMD_TODAYS_TASKS: TodaysTasks,
    CMD_ADD_TASK: AddTask,
}


@dataclass(frozen=True)
class TransitionResult:
    next_state: DialogueState
    outbound: tuple[str, ...] = ()
    record: TaskRecord | None = None


def _reprompt(state: DialogueState) -> TransitionResult:
    return TransitionResult(next_state=state, outbound=(TEXT_REQUIRED,))


def transition(state: DialogueState, text: str | None) -> TransitionResult:
    """Consume one inbound message and compute the next step of the form."""
    # Informational states answer whatever arrives, text or not
    match state:
        case AllTasks():
            return TransitionResult(ListOptions(), (ALL_TASKS_ACK,))
        case TodaysTasks():
            return TransitionResult(ListOptions(), (TODAYS_TASKS_ACK,))

    if text is None:
        return _reprompt(state)

    match state:
        case ListOptions():
            return TransitionResult(ChoseOption(option=text), MENU_LINES)

        case ChoseOption():
            command = _COMMANDS.get(text)
            if command is None:
                return TransitionResult(state, (INVALID_OPTION,))
            return TransitionResult(command())

        case AddTask():
            # A task record needs a name; an empty one is asked for again
            if not text:
                return _reprompt(state)
            return TransitionResult(ReceiveTask(task=text), ADD_TASK_LINES)

        case ReceiveTask(task=task):
            return TransitionResult(
                ReceiveTaskDeadline(task=task, deadline=text), (TASK_RECEIVED,)
            )

        case ReceiveTaskDeadline(task=task, deadline=deadline):
            return TransitionResult(
                ReceiveTaskReminder(task=task, deadline=deadline, reminder=text),
                (TASK_RECEIVED,),
            )

        case ReceiveTaskReminder(task=task, deadline=deadline, reminder=reminder):
            record = TaskRecord(task=task, deadline=deadline, reminder=reminder)
            return TransitionResult(ListOptions(), (TASK_RECEIVED,), record)

    raise TypeError(f"Unknown dialogue state: {state!r}")
