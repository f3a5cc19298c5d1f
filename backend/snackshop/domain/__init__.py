"""Domain layer - models and port interfaces"""
