"""WebLauncher - 个人书签启动器后端"""

__version__ = "1.0.0"
