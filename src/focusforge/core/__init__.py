"""
Core subsystem.

Components:
- state.py: AppStore, the process-wide session state and its actions
- models.py: DailyTask and the read-only AppSnapshot
- clock.py: calendar-day keys and the injectable clock
- ports.py: Protocols the core depends on
- sprint.py / summary.py: focus countdown and weekly report helpers
"""
