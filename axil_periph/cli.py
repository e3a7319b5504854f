from amaranth.cli import main_parser, main_runner
from .top import Peripheral

def main():
    parser = main_parser()
    parser.add_argument("--clk-freq", type=float, default=100e6,
        help="clock frequency in Hz (default: %(default)s)")
    parser.add_argument("--debounce-time", type=float, default=10e-3,
        help="interrupt input debounce time in s (default: %(default)s)")
    parser.add_argument("--num-leds", type=int, default=4,
        help="number of LED outputs (default: %(default)s)")
    parser.add_argument("--led-dimming", action="store_true",
        help="dim the LEDs with a PWM comparator")
    parser.add_argument("--led-duty", type=int, default=128,
        help="PWM duty cycle for LED dimming, out of 256 (default: %(default)s)")
    parser.add_argument("--refresh-rate", type=float, default=1000,
        help="7-segment digit changes per second (default: %(default)s)")
    parser.add_argument("--base-addr", type=lambda s: int(s, 0), default=0,
        help="register base address (default: %(default)s)")
    args = parser.parse_args()

    design = Peripheral(clk_freq=args.clk_freq, debounce_time=args.debounce_time,
                        num_leds=args.num_leds, led_dimming=args.led_dimming,
                        led_duty=args.led_duty, refresh_rate=args.refresh_rate,
                        base_addr=args.base_addr)

    main_runner(parser, args, design, name="axil_periph", ports=design.ports())

if __name__ == "__main__":
    main()
