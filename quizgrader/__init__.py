"""
Quiz Grader - answer grading for teacher-authored quizzes.

This package decides whether a student's submitted answer matches the
teacher's answer key for free text, multiple choice, checkbox, rating
and grid questions.
"""

__version__ = "1.0.0"
__author__ = "Quiz Grader Team"
