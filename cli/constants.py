"""CLI constants."""

from prompt_toolkit.styles import Style

COMMANDS = ["upload", "copy", "mkdir", "cd", "pwd", "queue", "clear", "exit", "help"]

STYLE = Style.from_dict(
    {
        "prompt": "#F38020 bold",
        "command": "#0088ff bold",
    }
)

ORANGE = "\033[38;2;243;128;32m"
GREEN = "\033[32m"
RESET = "\033[0m"

WELCOME_TITLE = f"{ORANGE}FlareDrive{RESET} transfer client"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "flaredrive:/{directory}> "

HELP_TEXT = """Available commands:
  upload <file> [file ...]       Queue local files for upload into the current remote directory
  copy <source> <target>         Copy a remote object (server-side, nothing is downloaded)
  mkdir <name>                   Create a folder in the current remote directory
  cd [directory]                 Change remote directory ('..' for parent, no argument for root)
  pwd                            Show the current remote directory
  queue                          Show pending and finished uploads
  clear                          Clear screen and redisplay welcome message
  help                           Show this help
  exit                           Exit REPL (waits for queued uploads)

Files of 100 MB or more are uploaded in 100 MB parts, two at a time.
Examples:
  cd photos/2024
  upload IMG_0001.jpg IMG_0002.jpg "holiday video.mp4"
  mkdir raw
  copy photos/2024/IMG_0001.jpg backup/IMG_0001.jpg"""
