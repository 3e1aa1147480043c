"""Trend Campaign Service test contracts"""
