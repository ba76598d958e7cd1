"""Job orchestration facade in front of a Control-M style batch scheduler."""
