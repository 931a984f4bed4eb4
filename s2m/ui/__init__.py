"""Thin UI layer.

This package contains the Streamlit pages that:
- collect the story and scene count
- drive a StoryboardController
- render the storyboard, thumbnail and scene cards

Orchestration logic lives in s2m.core; network calls live in s2m.services.
"""
