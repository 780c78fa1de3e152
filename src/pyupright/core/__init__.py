""" Core pyupright module.

This module contains the dimension bookkeeping shared by all state/input mappings,
as well as utilities that run those mappings against a Pinocchio model.
"""
