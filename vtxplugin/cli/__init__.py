"""CLI module for vtxplugin."""
