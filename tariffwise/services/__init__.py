"""Application services layer.

Services coordinate work across domains and infrastructure (calculation,
history persistence). They should avoid UI concerns.
"""
