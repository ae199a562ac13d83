"""Matcher integration"""
