"""Application layer.

Use cases orchestrate the editor state, the segmentation pipeline and
external providers to fulfil one user intent.

Rule of thumb:
view -> application.use_cases -> editor/segmentation/settings
"""
