"""
Shared constants for taskbot.

All user-facing strings of the task form live here so the dialogue engine and
the dispatcher stay in sync.
"""

# ── Menu ────────────────────────────────────────────────────────────────────────
MENU_LINES = (
    "Choose an option",
    "Display all tasks -> /alltasks",
    "Display today's tasks -> /todaystasks",
    "Add a task -> /addtask",
)

CMD_ALL_TASKS = "/alltasks"
CMD_TODAYS_TASKS = "/todaystasks"
CMD_ADD_TASK = "/addtask"


# ── Prompts ─────────────────────────────────────────────────────────────────────
TEXT_REQUIRED = "Please send a text message"
INVALID_OPTION = "Please send a valid option"
ALL_TASKS_ACK = "All tasks"
TODAYS_TASKS_ACK = "Today's tasks"
ADD_TASK_LINES = ("Add a task", "Enter task name")
TASK_RECEIVED = "Task received"


# ── Persistence outcome notices ─────────────────────────────────────────────────
TASK_SAVED = "Task saved to database"
TASK_SAVE_FAILED = "Error saving task to database"
