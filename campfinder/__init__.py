"""
Camp Finder: quiz-driven summer camp recommendations.
"""
