"""Scholaris: grading and academic structure for multi-national school administration."""
