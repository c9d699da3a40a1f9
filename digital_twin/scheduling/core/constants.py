"""
Constants shared by the scheduling engine.
"""

# Hard cap on how far ahead the slot finder looks
MAX_DAYS = 14

# Candidate start times are stepped in fixed increments
STEP_MINUTES = 30

DEFAULT_DURATION_MINUTES = 60

# Working hours used when nothing else is configured
DEFAULT_START_HOUR = 9
DEFAULT_END_HOUR = 17
DEFAULT_WORK_DAYS = (1, 2, 3, 4, 5)  # 0=Sunday .. 6=Saturday

# Color tags by priority
RED = "red"
YELLOW = "yellow"
BLUE = "blue"

# Google Calendar colorId for each tag (Tomato, Banana, Blueberry)
GOOGLE_COLOR_IDS = {
    RED: "11",
    YELLOW: "5",
    BLUE: "9",
}
