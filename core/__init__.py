"""
Core module for the LiveLens Node pipeline.

Contains the event bus, typed frames/results/events, the frame scheduler,
the recognition pipeline and its stages, and the collaborator protocols.
"""
