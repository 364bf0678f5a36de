"""Dealership API: car model catalog and salesman commission reports."""
