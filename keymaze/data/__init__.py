from .maze_loader import MazeFormatError, parse_maze, load_maze_file, grid_to_rows

__all__ = ['MazeFormatError', 'parse_maze', 'load_maze_file', 'grid_to_rows']
