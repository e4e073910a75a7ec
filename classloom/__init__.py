"""ClassLoom: C# view-model classes → TypeScript class skeletons."""

__version__ = "0.1.0"
