from amaranth import *
from .axi import AXILiteBus
from .axi_reg_bank import AXIRegBank
from .reg_file import RegisterFile
from .input_cond import InputConditioner, debounce_cycles
from .leds import LEDDriver
from .seven_seg import SevenSegment

class Peripheral(Elaboratable):
    """Memory-mapped peripheral controller.

    An AXI4-Lite slave with four registers (see RegisterFile), driving
    num_leds LEDs from the control register and a 4 digit 7-segment display
    from the data register. A rising edge on int_in (after synchronization
    and debouncing) sets the interrupt flag in the status register; irq
    follows the flag until software clears it.

    The bus reset (areset_n low) resets the whole peripheral.
    """
    def __init__(self, clk_freq=100e6, debounce_time=10e-3, debounce_threshold=None,
                 num_leds=4, led_dimming=False, led_duty=128, refresh_rate=1000,
                 refresh_divider=None, base_addr=0):
        if debounce_threshold is None:
            debounce_threshold = debounce_cycles(clk_freq, debounce_time)

        self.bus = AXILiteBus()

        self.reg_file = RegisterFile(base_addr=base_addr, addr_bits=self.bus.addr_bits)
        self.axi_slave = AXIRegBank(self.bus, self.reg_file)
        self.int_cond = InputConditioner(debounce_threshold)
        self.led_driver = LEDDriver(num_leds, dimming=led_dimming, duty=led_duty)
        self.seven_seg = SevenSegment(clk_freq, refresh_rate=refresh_rate, divider=refresh_divider)

        self.int_in = Signal()
        self.irq = Signal()
        self.leds = Signal(num_leds)
        self.segments = Signal(7)
        self.digit = Signal(4)

    def ports(self):
        return self.bus.fields() + [ self.int_in, self.irq, self.leds, self.segments, self.digit ]

    def elaborate(self, platform):
        m = Module()

        rst = Signal()
        m.d.comb += rst.eq(~self.bus.areset_n)

        # The adapter handles areset_n itself, everything else is reset here.
        m.submodules.axi_slave = self.axi_slave
        m.submodules.reg_file = ResetInserter(rst)(self.reg_file)
        m.submodules.int_cond = ResetInserter(rst)(self.int_cond)
        m.submodules.led_driver = ResetInserter(rst)(self.led_driver)
        m.submodules.seven_seg = ResetInserter(rst)(self.seven_seg)

        # Interrupt
        m.d.comb += self.int_cond.i.eq(self.int_in)
        m.d.comb += self.reg_file.irq_set.eq(self.int_cond.o)
        m.d.comb += self.irq.eq(self.reg_file.irq)

        # Outputs
        m.d.comb += self.led_driver.ctrl_in.eq(self.reg_file.control)
        m.d.comb += self.leds.eq(self.led_driver.leds)

        m.d.comb += self.seven_seg.value_in.eq(self.reg_file.data[0:16])
        m.d.comb += self.segments.eq(self.seven_seg.segments)
        m.d.comb += self.digit.eq(self.seven_seg.digit)

        return m
