BOARD_SIZE = 15
CENTER = (BOARD_SIZE // 2, BOARD_SIZE // 2)
RACK_SIZE = 7
BINGO_BONUS = 50

MIN_PLAYERS = 2
MAX_PLAYERS = 4

LETTER_SCORES = {
    'A': 1, 'B': 3, 'C': 3, 'D': 2, 'E': 1, 'F': 4, 'G': 2, 'H': 4, 'I': 1, 'J': 8,
    'K': 5, 'L': 1, 'M': 3, 'N': 1, 'O': 1, 'P': 3, 'Q': 10, 'R': 1, 'S': 1, 'T': 1,
    'U': 1, 'V': 4, 'W': 4, 'X': 8, 'Y': 4, 'Z': 10,
}

# '*' marks the blank tiles in the distribution
BLANK_MARKER = '*'
BLANK_PLACEHOLDER = ''
TILE_DISTRIBUTION = {
    'A': 9, 'B': 2, 'C': 2, 'D': 4, 'E': 12, 'F': 2, 'G': 3, 'H': 2, 'I': 9, 'J': 1, 'K': 1, 'L': 4, 'M': 2,
    'N': 6, 'O': 8, 'P': 2, 'Q': 1, 'R': 6, 'S': 4, 'T': 6, 'U': 4, 'V': 2, 'W': 2, 'X': 1, 'Y': 2, 'Z': 1,
    BLANK_MARKER: 2,
}
TOTAL_TILES = sum(TILE_DISTRIBUTION.values())

# Upper-left quadrant bases, mirrored across both axes by the board module.
TRIPLE_WORD_BASE = [(0, 0), (0, 7), (7, 0)]
DOUBLE_WORD_BASE = [(r, r) for r in range(1, 5)]
TRIPLE_LETTER_BASE = [(1, 5), (5, 1), (5, 5)]
DOUBLE_LETTER_BASE = [(0, 3), (2, 6), (3, 0), (3, 7), (6, 2), (6, 6), (7, 3)]

DEFAULT_CHALLENGE_WINDOW_SECONDS = 30.0
DEFAULT_ORACLE_TIMEOUT_SECONDS = 5.0
PASS_LIMIT_PER_PLAYER = 2
EXPIRY_SWEEP_INTERVAL_SECONDS = 1.0
