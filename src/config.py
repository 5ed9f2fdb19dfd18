DEFAULT_TIMEOUT = 300
DEFAULT_ENCODING = "int"
DEFAULT_BV_WIDTH = 8
DEFAULT_FRACTION = (1, 1)
DEFAULT_NUM_STATES = 1
DEFAULT_OUTPUT_BOUND = 1
MAX_OUTPUT_BOUND = 4
MAX_SOLUTIONS = 2
POLL_INTERVAL = 0.1

DEFAULT_TARGET_FOLDER = "solutions/"
DEFAULT_DOT_FILENAME = "{problem_name}.dot"
LOG_FORMAT = '%(asctime)-15s %(levelname)s:%(name)s:%(message)s'
