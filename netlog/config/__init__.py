"""Configuration Package

Purpose: settings and field configuration for netlog
"""
