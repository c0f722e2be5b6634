"""ghp: GitHub Projects workflow orchestration with lifecycle hooks."""
