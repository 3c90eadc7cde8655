"""
CLI REPL (Read-Eval-Print Loop) for catlink.

Provides an interactive CAT terminal for a connected transceiver.
"""

import sys
import logging
from typing import Optional

from .config import load_serial_config
from .controller import RadioController
from .exceptions import CATError
from .radios import available_models
from .types import BAUD_RATES, DATA_BITS, FlowControl, Parity, ProtocolFamily, SerialConfig, StopBits
from .version import __version__

SWITCHES = {
    "ptt": "set_ptt",
    "split": "set_split",
    "lock": "set_lock",
    "clar": "set_clarifier",
    "power": "set_power",
}


class CatCLI:
    """Interactive CAT command REPL."""

    def __init__(self, radio: str, config: SerialConfig):
        """
        Initialize CLI.

        Args:
            radio: Radio model name
            config: Serial settings
        """
        self.radio_name = radio
        self.config = config
        self.radio: Optional[RadioController] = None

    def run(self):
        """Run the REPL."""
        print(f"catlink CLI v{__version__}")
        print(f"Connecting to {self.config.port} at {self.config.baudrate} baud...")
        print("Type 'help' for commands, 'quit' to exit\n")

        try:
            self.radio = RadioController(self.radio_name)
            self.radio.open(self.config)

            print(f"Connected! Talking to {self.radio.radio.name}.\n")

            # REPL loop
            while True:
                try:
                    line = input("> ").strip()

                    if not line:
                        continue

                    if line.lower() in ("quit", "exit", "q"):
                        break

                    self._handle(line)

                except KeyboardInterrupt:
                    print("\nUse 'quit' to exit")
                    continue
                except EOFError:
                    break

        except CATError as e:
            print(f"\nError: {e}")
            return 1
        except Exception as e:
            print(f"\nUnexpected error: {e}")
            logging.exception("CLI error")
            return 1
        finally:
            if self.radio:
                print("\nClosing connection...")
                self.radio.close()
                print("Goodbye!")

        return 0

    def _handle(self, line: str):
        """Dispatch one input line."""
        words = line.split()
        name = words[0].lower()
        args = [w.lower() for w in words[1:]]

        try:
            if name == "help":
                self._print_help()
            elif name == "clear":
                print("\033[2J\033[H", end="")  # Clear screen
            elif name == "status":
                self._show_status()
            elif name == "freq":
                self._frequency(args)
            elif name == "mode":
                self._mode(args)
            elif name == "vfo":
                self._report(self.radio.toggle_vfo())
            elif name in SWITCHES and args and args[0] in ("on", "off"):
                self._report(getattr(self.radio, SWITCHES[name])(args[0] == "on"))
            else:
                self._send_raw(line)
        except CATError as e:
            print(f"Error: {e}")
        except ValueError as e:
            print(f"Invalid input: {e}")

    def _frequency(self, args: list[str]):
        """freq [a|b] [hz]"""
        vfo = "a"
        if args and args[0] in ("a", "b"):
            vfo = args.pop(0)

        if not args:
            hz = getattr(self.radio, f"get_frequency_{vfo}")()
            print(f"VFO {vfo.upper()}: {hz} Hz" if hz is not None else "No answer")
            return

        self._report(getattr(self.radio, f"set_frequency_{vfo}")(int(args[0])))

    def _mode(self, args: list[str]):
        """mode [name]"""
        if not args:
            mode = self.radio.get_mode()
            print(f"Mode: {mode.value}" if mode is not None else "No answer")
            return

        self._report(self.radio.set_mode(args[0]))

    def _send_raw(self, line: str):
        """Send a raw command and display response."""
        if self.radio.radio.family is ProtocolFamily.CIV_BINARY:
            response = self.radio.send_raw(bytes.fromhex(line))
            reply = response.hex
        else:
            response = self.radio.send_raw(line)
            reply = response.text

        if response.success:
            print(reply)
        else:
            print(f"(no reply: {response.error})")

    @staticmethod
    def _report(accepted: bool):
        print("OK" if accepted else "Not accepted")

    def _show_status(self):
        """Show connection status."""
        status = self.radio.status()
        print(f"\nRadio: {status.radio}")
        print(f"Port: {status.port_name or '-'} ({'open' if status.is_open else 'closed'})")
        if status.last_activity:
            print(f"Last activity: {status.last_activity.isoformat()}")

    def _print_help(self):
        """Print help message."""
        print("""
Available commands:
  <raw command>     - Send raw CAT text (e.g. FA;) or CI-V hex (e.g. FE FE 94 E0 03 FD)
  freq [a|b] [hz]   - Read or set VFO frequency
  mode [name]       - Read or set mode (LSB USB CW CWR AM FM DIG PKT)
  ptt on|off        - Key / unkey transmitter
  split on|off      - Split operation
  lock on|off       - Dial lock
  clar on|off       - Clarifier
  power on|off      - Radio power
  vfo               - Swap VFO A/B
  status            - Show connection status
  help              - Show this help message
  clear             - Clear screen
  quit/exit/q       - Exit CLI
        """)


def main():
    """Main entry point for CLI."""
    import argparse

    parser = argparse.ArgumentParser(
        description="catlink CLI - Interactive CAT terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cat-cli /dev/ttyUSB0 --radio FT-991A --baudrate 38400
  cat-cli COM3 --radio IC-7300 --baudrate 19200
  cat-cli --config server-config.json
  cat-cli --list-ports
        """
    )

    parser.add_argument(
        "port",
        nargs="?",
        help="Serial port (e.g., /dev/ttyUSB0, COM3)"
    )
    parser.add_argument(
        "-r", "--radio",
        default="Yaesu FT-991A",
        help=f"Radio model (available: {', '.join(available_models())})"
    )
    parser.add_argument(
        "-b", "--baudrate",
        type=int,
        choices=BAUD_RATES,
        help="Baud rate (default: 9600)"
    )
    parser.add_argument(
        "--parity",
        choices=[p.value for p in Parity],
        help="Parity (default: None)"
    )
    parser.add_argument(
        "--stopbits",
        choices=[s.value for s in StopBits if s is not StopBits.NONE],
        help="Stop bits (default: One)"
    )
    parser.add_argument(
        "--databits",
        type=int,
        choices=DATA_BITS,
        help="Data bits (default: 8)"
    )
    parser.add_argument(
        "--flow",
        choices=[f.value for f in FlowControl],
        help="Flow control (default: None)"
    )
    parser.add_argument(
        "-c", "--config",
        help="JSON file with serial settings"
    )
    parser.add_argument(
        "--list-ports",
        action="store_true",
        help="List serial ports and exit"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    args = parser.parse_args()

    # Setup logging
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
    else:
        logging.basicConfig(
            level=logging.WARNING,
            format='%(levelname)s: %(message)s'
        )

    if args.list_ports:
        for port in RadioController.list_ports():
            print(port)
        return 0

    overrides = {
        "port": args.port,
        "baudrate": args.baudrate,
        "parity": args.parity,
        "stop_bits": args.stopbits,
        "data_bits": args.databits,
        "flow_control": args.flow,
    }

    try:
        if args.config:
            config = load_serial_config(args.config, **overrides)
        elif args.port:
            config = SerialConfig(**{k: v for k, v in overrides.items() if v is not None})
        else:
            parser.error("a port or --config is required")
    except CATError as e:
        print(f"Error: {e}")
        return 1

    # Run CLI
    cli = CatCLI(radio=args.radio, config=config)

    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
