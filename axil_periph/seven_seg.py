from amaranth import *

# Segment patterns for hex digits 0-F.
# Bit 0 is segment a, bit 6 is segment g. Active high.
SEGMENT_TABLE = [
    0b0111111,  # 0
    0b0000110,  # 1
    0b1011011,  # 2
    0b1001111,  # 3
    0b1100110,  # 4
    0b1101101,  # 5
    0b1111101,  # 6
    0b0000111,  # 7
    0b1111111,  # 8
    0b1101111,  # 9
    0b1110111,  # A
    0b1111100,  # b
    0b0111001,  # C
    0b1011110,  # d
    0b1111001,  # E
    0b1110001,  # F
]

class SevenSegment(Elaboratable):
    """Multiplexed driver for a 4 digit 7-segment display.

    Shows value_in[0:16] as four hex digits, one digit at a time. Digit k
    shows value_in[4*k:4*(k+1)] and is selected by bit k of the one-hot
    digit output. The driver moves on to the next digit every `divider'
    clock cycles; if divider is not given, it is derived from clk_freq and
    refresh_rate (digit changes per second).
    """
    def __init__(self, clk_freq=None, refresh_rate=1000, divider=None):
        if divider is None:
            if clk_freq is None:
                raise ValueError("Either clk_freq or divider must be given")
            if refresh_rate <= 0:
                raise ValueError("Refresh rate must be positive, not {}".format(refresh_rate))
            divider = max(int(clk_freq // refresh_rate), 1)
        if divider < 1:
            raise ValueError("Divider must be at least 1, not {}".format(divider))

        self.divider = divider

        self.value_in = Signal(16)
        self.segments = Signal(7)
        self.digit = Signal(4)

    def elaborate(self, platform):
        m = Module()

        table = Array(Const(pattern, 7) for pattern in SEGMENT_TABLE)
        nibbles = Array(self.value_in[4*k:4*(k+1)] for k in range(0, 4))

        index = Signal(2)

        # Prescaler
        if self.divider == 1:
            m.d.sync += index.eq(index + 1)
        else:
            prescaler = Signal(range(self.divider))
            with m.If(prescaler == self.divider - 1):
                m.d.sync += prescaler.eq(0)
                m.d.sync += index.eq(index + 1)
            with m.Else():
                m.d.sync += prescaler.eq(prescaler + 1)

        nibble = Signal(4)
        m.d.comb += nibble.eq(nibbles[index])

        m.d.comb += self.digit.eq(Const(1, 4) << index)
        m.d.comb += self.segments.eq(table[nibble])

        return m
