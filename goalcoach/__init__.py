"""GoalCoach - conversational goal and task tracking backend."""

__version__ = "0.1.0"
__logo__ = "🎯"
