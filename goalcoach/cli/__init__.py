"""Command-line interface for GoalCoach."""
