from amaranth import *

CONTROL_REG  = 0x00
DATA_REG     = 0x04
STATUS_REG   = 0x08
RESERVED_REG = 0x0C

# Returned for reads outside the register map.
READ_SENTINEL = 0xDEADBEEF

class Register_RW(Elaboratable):
    """Plain read/write register with per-byte write enables."""
    def __init__(self):
        self.data_in = Signal(32)
        self.wstrb_in = Signal(4)
        self.data_out = Signal(32)

        self._data = Signal(32)

    def elaborate(self, platform):
        m = Module()

        for i in range(0, 4):
            with m.If(self.wstrb_in[i] == 1):
                m.d.sync += self._data[8*i:8*(i+1)].eq(self.data_in[8*i:8*(i+1)])

        m.d.comb += self.data_out.eq(self._data)

        return m

class StatusRegister(Elaboratable):
    """Status register (write to clear)

    Bit 0: Interrupt pending. Set by hardware through set_in, write 1 to clear.
    Bits 31..1: Reserved, read as 0, writes are ignored.

    If set_in is asserted in the same cycle as a clearing write, the bit
    stays set.
    """
    def __init__(self):
        self.data_in = Signal(32)
        self.wstrb_in = Signal(4)
        self.data_out = Signal(32)

        self.set_in = Signal()
        self.pending_out = Signal()

        self._pending = Signal()

    def elaborate(self, platform):
        m = Module()

        m.d.comb += self.data_out.eq(Cat(self._pending, Const(0, 31)))

        with m.If((self.wstrb_in[0] == 1) & (self.data_in[0] == 1)):
            m.d.sync += self._pending.eq(0)

        # must come after the clear so that it takes priority
        with m.If(self.set_in):
            m.d.sync += self._pending.eq(1)

        m.d.comb += self.pending_out.eq(self._pending)

        return m

class RegisterFile(Elaboratable):
    """Register file with one write port and one read port.

    Register map (offsets relative to base_addr):

    0x00 Control: read/write. The low bits drive the LEDs.
    0x04 Data: read/write. The low 16 bits drive the 7-segment display.
    0x08 Status: bit 0 is the interrupt flag (write 1 to clear).
    0x0C Reserved: read/write, no function.

    Writes take effect on the next clock edge. Reads are registered: rdata
    holds the value of the addressed register one cycle after re was
    asserted, together with a single-cycle rvalid. Writes outside the map
    are dropped, reads outside the map return READ_SENTINEL.
    """
    def __init__(self, base_addr=0, addr_bits=32):
        if base_addr % 16 != 0:
            raise ValueError("Base address must be aligned to 16 bytes, not 0x{:x}".format(base_addr))

        self.base_addr = base_addr

        self.control_reg = Register_RW()
        self.data_reg = Register_RW()
        self.status_reg = StatusRegister()
        self.reserved_reg = Register_RW()

        # address decode table
        self.regs = [
            (CONTROL_REG, self.control_reg),
            (DATA_REG, self.data_reg),
            (STATUS_REG, self.status_reg),
            (RESERVED_REG, self.reserved_reg),
        ]

        # write port
        self.we = Signal()
        self.waddr = Signal(addr_bits)
        self.wdata = Signal(32)
        self.wstrb = Signal(4)

        # read port
        self.re = Signal()
        self.raddr = Signal(addr_bits)
        self.rdata = Signal(32)
        self.rvalid = Signal()

        # hardware interface
        self.irq_set = Signal()
        self.irq = Signal()
        self.control = Signal(32)
        self.data = Signal(32)

    def word_index(self, offset):
        return (self.base_addr + offset) >> 2

    def elaborate(self, platform):
        m = Module()

        for offset, reg in self.regs:
            m.submodules["reg_{:02x}".format(offset)] = reg

        # Write handling
        for offset, reg in self.regs:
            m.d.comb += reg.data_in.eq(self.wdata)

        with m.If(self.we):
            with m.Switch(self.waddr[2:]):
                for offset, reg in self.regs:
                    with m.Case(self.word_index(offset)):
                        m.d.comb += reg.wstrb_in.eq(self.wstrb)

        # Read handling
        m.d.sync += self.rvalid.eq(self.re)

        with m.If(self.re):
            with m.Switch(self.raddr[2:]):
                for offset, reg in self.regs:
                    with m.Case(self.word_index(offset)):
                        m.d.sync += self.rdata.eq(reg.data_out)
                with m.Default():
                    m.d.sync += self.rdata.eq(READ_SENTINEL)

        m.d.comb += self.status_reg.set_in.eq(self.irq_set)
        m.d.comb += self.irq.eq(self.status_reg.pending_out)
        m.d.comb += self.control.eq(self.control_reg.data_out)
        m.d.comb += self.data.eq(self.data_reg.data_out)

        return m
