"""
Basic connection example.

Demonstrates connecting to an ASCII-family radio and reading its state.
"""

from catlink import RadioController, CATError

# Replace with your serial port
PORT = "/dev/ttyUSB0"


def main():
    """Main function."""
    print("catlink - Basic Connection Example\n")

    # Connect using context manager
    # This automatically opens and closes the port
    with RadioController("FT-991A", port=PORT, baudrate=38400) as radio:
        print(f"Connected to {radio.radio.name}!\n")

        print("=== Frequencies ===")
        for vfo, read in (("A", radio.get_frequency_a), ("B", radio.get_frequency_b)):
            hz = read()
            print(f"VFO {vfo}: {hz} Hz" if hz is not None else f"VFO {vfo}: no answer")

        mode = radio.get_mode()
        print(f"Mode: {mode.value if mode else 'unknown'}")

        print("\n=== Tune to FT8 on 20m ===")
        try:
            if radio.set_frequency_a(14_074_000) and radio.set_mode("DIG"):
                print("Done")
            else:
                print("Radio rejected the command")
        except CATError as e:
            print(f"Error: {e}")

    print("\nConnection closed.")


if __name__ == "__main__":
    main()
