"""Infrastructure modules for the bot application.

Centralized infrastructure components:
- commands: Command framework (argument types, command tree, message handling)
"""
