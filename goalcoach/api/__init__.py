"""HTTP API for GoalCoach."""
