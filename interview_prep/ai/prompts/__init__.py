"""Prompt templates for plan generation and mock interviews."""
