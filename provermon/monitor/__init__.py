"""provermon display layer — consumer of the dashboard snapshot.

Modules
-------
renderer
    ``DashboardRenderer`` turns ``DashboardSnapshot`` into Rich renderables
    for terminal display, including continuous ``Rich.Live`` mode.
"""
