""" Example models and utilities to add moving obstacles to Pinocchio models. """
