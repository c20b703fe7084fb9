"""
Constants for training plan generation.

Enums are str-valued so they serialize cleanly to JSON and can be built
straight from wizard/form values.
"""

from enum import Enum
from typing import Dict


class Distance(str, Enum):
    """Goal race distances."""
    FIVE_K = "5K"
    TEN_K = "10K"
    HALF = "Half"
    MARATHON = "Marathon"


class ExperienceLevel(str, Enum):
    """Self-reported runner experience."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class PhaseType(str, Enum):
    """Training phases, in plan order."""
    BASE = "base"
    BUILD = "build"
    PEAK = "peak"
    TAPER = "taper"


class WorkoutType(str, Enum):
    """Workout kinds a plan day can hold."""
    EASY = "easy"
    LONG = "long"
    TEMPO = "tempo"
    INTERVALS = "intervals"
    HILLS = "hills"
    FARTLEK = "fartlek"
    RECOVERY = "recovery"
    RACE_PACE = "race_pace"
    REST = "rest"
    CROSS_TRAINING = "cross_training"


class LongRunDay(str, Enum):
    """Preferred day for the weekly long run."""
    SATURDAY = "saturday"
    SUNDAY = "sunday"
    FLEXIBLE = "flexible"


class TrainingPhilosophy(str, Enum):
    """Collected by the wizard; not consulted by generation."""
    BALANCED = "balanced"
    SPEED = "speed"
    ENDURANCE = "endurance"


PHASE_ORDER = (PhaseType.BASE, PhaseType.BUILD, PhaseType.PEAK, PhaseType.TAPER)

# Race length in km used for pace math
DISTANCE_KM: Dict[Distance, float] = {
    Distance.FIVE_K: 5.0,
    Distance.TEN_K: 10.0,
    Distance.HALF: 21.1,
    Distance.MARATHON: 42.2,
}

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

# Kinds that don't carry a running pace
NON_RUNNING_TYPES = (WorkoutType.REST, WorkoutType.CROSS_TRAINING)

# Kinds counted as quality sessions in plan summaries
QUALITY_TYPES = (
    WorkoutType.TEMPO,
    WorkoutType.INTERVALS,
    WorkoutType.HILLS,
    WorkoutType.FARTLEK,
    WorkoutType.RACE_PACE,
)

NOT_APPLICABLE = "N/A"
EFFORT_BASED = "Effort-based"
