"""Daily simulation passes, the day schedule and the headless engine."""
