"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = [
    "signup", "login", "register", "upload", "download", "authorize", "revoke",
    "prove", "info", "profile", "files", "stats", "settings", "admin",
    "clear", "exit", "help",
]

ADMIN_ACTIONS = [
    "pause", "unpause", "set-fee", "set-threshold", "set-default-quota",
    "set-max-quota", "set-quota", "suspend", "unsuspend",
]

STYLE = Style.from_dict(
    {
        "prompt": "#2BB673 bold",
        "command": "#0088ff bold",
    }
)

GREEN = "\033[38;2;43;182;115m"
RESET = "\033[0m"

LOGO = f"""{GREEN}
 ██████╗ ██████╗  ██████╗  ██████╗ ███████╗██╗   ██╗ █████╗ ██╗   ██╗██╗  ████████╗
 ██╔══██╗██╔══██╗██╔═══██╗██╔═══██╗██╔════╝██║   ██║██╔══██╗██║   ██║██║  ╚══██╔══╝
 ██████╔╝██████╔╝██║   ██║██║   ██║█████╗  ██║   ██║███████║██║   ██║██║     ██║
 ██╔═══╝ ██╔══██╗██║   ██║██║   ██║██╔══╝  ╚██╗ ██╔╝██╔══██║██║   ██║██║     ██║
 ██║     ██║  ██║╚██████╔╝╚██████╔╝██║      ╚████╔╝ ██║  ██║╚██████╔╝███████╗██║
 ╚═╝     ╚═╝  ╚═╝ ╚═════╝  ╚═════╝ ╚═╝       ╚═══╝  ╚═╝  ╚═╝ ╚═════╝ ╚══════╝╚═╝
{RESET}"""

WELCOME_TITLE = "ProofVault CLI - Proof-verified File Registry"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "proofvault> "

HELP_TEXT = """Available commands:
  signup <identity> <password>        Create credentials and store the API key
  login <identity> <password>         Login and rotate the API key
  register <name>                     Register a profile (name: 3+ characters)
  upload <path> [fee]                 Hash a local file and register it (fee defaults to the storage fee)
  download <file_hash>                Record a download of a file you may access
  authorize <file_hash> <identity>    Grant download rights
  revoke <file_hash> <identity>       Withdraw download rights
  prove <path> [chunk_index]          Submit a Merkle inclusion proof for one chunk of a local file
  info <file_hash>                    Show file metadata
  profile [identity]                  Show a profile (default: yours)
  files [identity]                    List files owned by an identity (default: you)
  stats                               Show system statistics
  settings                            Show fee, threshold and quota settings
  admin <action> [args]               Administrator actions:
                                        pause | unpause
                                        set-fee <n> | set-threshold <n>
                                        set-default-quota <bytes> | set-max-quota <bytes>
                                        set-quota <identity> <bytes>
                                        suspend <identity> | unsuspend <identity>
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit REPL

Examples:
  signup alice mypassword123
  register alice
  upload reports/q3.pdf
  prove reports/q3.pdf 2
  authorize 9f86d081... bob
  admin set-threshold 5"""
