"""
CI-V radio example.

Demonstrates tone settings and raw frames on an Icom radio.
"""

from catlink import RadioController, ToneMode

PORT = "/dev/ttyUSB0"


def on_disconnect(error):
    """Called when the radio goes away mid-command."""
    print(f"Radio disconnected: {error}")


def main():
    """Main function."""
    radio = RadioController("IC-7300", on_disconnect=on_disconnect)
    radio.open(PORT, baudrate=19200, read_timeout=0.5)

    try:
        print(f"Status: {radio.status()}")

        # Repeater setup: 88.5 Hz tone encoder
        ok = radio.set_tone_mode(ToneMode.ENCODER) and radio.set_ctcss_tone(88.5)
        print(f"Tone set: {ok}")

        # Read operating frequency (command 0x03) as a raw frame
        response = radio.send_raw(bytes.fromhex("FEFE94E003FD"))
        print(f"Raw reply: {response.hex or response.error}")

    finally:
        radio.close()


if __name__ == "__main__":
    main()
