"""Core models shared by every fileexplorer component."""
