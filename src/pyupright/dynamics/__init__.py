""" Mappings between the optimization variables and the kinematic model state. """
