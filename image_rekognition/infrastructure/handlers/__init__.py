"""
Lambda entry points for the Detection Worker and the Front-End API.
"""
