"""
Barony Checkpoint Manager

Watches a Barony savegames directory, keeps timestamped backups of every
save and puts the newest one back when the game deletes a save.
"""

__version__ = "1.0.0"
