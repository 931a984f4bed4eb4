"""S2M: Story-to-Media storyboard generator."""

__version__ = "0.1.0"
