"""Domain layer for the spaced reading tracker."""
