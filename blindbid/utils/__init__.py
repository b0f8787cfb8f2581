"""Logging, validation and unit helpers"""
