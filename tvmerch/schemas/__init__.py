"""Shared pydantic schemas"""
