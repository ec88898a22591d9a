"""Game constants."""

GRID_COUNT = 30
INITIAL_LENGTH = 3
# Smallest grid that fits the centred starting snake.
MIN_GRID_COUNT = 2 * INITIAL_LENGTH - 1
SCORE_PER_FOOD = 10
POINTS_PER_LEVEL = 50

# Food placement switches from rejection sampling to scanning free cells
# once the snake covers this share of the grid.
FREE_CELL_SCAN_RATIO = 0.5
MAX_FOOD_ATTEMPTS = 500

DIRECTIONS = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}

DEFAULT_DIFFICULTY = "normal"

# name -> (label, base_speed_ms, speed_increment_ms, min_speed_factor)
DIFFICULTIES = {
    "easy": ("Easy", 200, 5, 0.5),
    "normal": ("Normal", 150, 10, 0.5),
    "hard": ("Hard", 100, 10, 0.5),
    # Original single-speed game: 150ms start, never faster than 50ms.
    "classic": ("Classic", 150, 10, 1 / 3),
}

HIGH_SCORE_KEY = "snake_high_score"
