"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, TaskPriority, TaskForm, Attachment) + decoding
- task_filters.py: pure filtering and statistics over a task collection
"""
