""" Mappings between trajectory optimization variables and Pinocchio models with moving obstacles. """
