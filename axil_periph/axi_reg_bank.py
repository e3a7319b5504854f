from amaranth import *
from .axi import AXIResponse

class AXIRegBank(Elaboratable):
    """AXI4-Lite slave in front of a RegisterFile.

    The write address and write data channels are independent: the master
    may present address and data in either order or in the same cycle. The
    slave accepts whichever half arrives first, then waits for the other one
    and performs a single register write once both are known.

    Only one write and one read can be in flight at a time. The response is
    always OKAY, also for addresses outside the register map (writes to them
    are dropped, reads return the register file's sentinel value).

    The register file is not added as a submodule; it is up to the parent to
    do so (and to reset it together with the bus).
    """
    def __init__(self, axi_bus, reg_file):
        self.bus = axi_bus
        self.reg_file = reg_file

    def elaborate(self, platform):
        m = Module()

        # Write handling
        awaddr = Signal.like(self.bus.awaddr)
        wdata = Signal.like(self.bus.wdata)
        wstrb = Signal.like(self.bus.wstrb)

        m.d.comb += self.reg_file.waddr.eq(awaddr)
        m.d.comb += self.reg_file.wdata.eq(wdata)
        m.d.comb += self.reg_file.wstrb.eq(wstrb)
        m.d.comb += self.bus.bresp.eq(AXIResponse.OKAY)

        with m.FSM(init="RESET", name="write_fsm"):
            with m.State("RESET"):
                with m.If(self.bus.areset_n == 1):
                    m.next = "IDLE"

            with m.State("IDLE"):
                with m.If(self.bus.areset_n == 0):
                    m.next = "RESET"
                with m.Else():
                    m.d.comb += self.bus.awready.eq(1)
                    m.d.comb += self.bus.wready.eq(1)

                    with m.If(self.bus.awvalid == 1):
                        m.d.sync += awaddr.eq(self.bus.awaddr)
                    with m.If(self.bus.wvalid == 1):
                        m.d.sync += wdata.eq(self.bus.wdata)
                        m.d.sync += wstrb.eq(self.bus.wstrb)

                    with m.If((self.bus.awvalid == 1) & (self.bus.wvalid == 1)):
                        m.next = "BOTH_CAPTURED"
                    with m.Elif(self.bus.awvalid == 1):
                        m.next = "ADDR_ONLY"
                    with m.Elif(self.bus.wvalid == 1):
                        m.next = "DATA_ONLY"

            with m.State("ADDR_ONLY"):
                with m.If(self.bus.areset_n == 0):
                    m.next = "RESET"
                with m.Else():
                    m.d.comb += self.bus.wready.eq(1)

                    with m.If(self.bus.wvalid == 1):
                        m.d.sync += wdata.eq(self.bus.wdata)
                        m.d.sync += wstrb.eq(self.bus.wstrb)
                        m.next = "BOTH_CAPTURED"

            with m.State("DATA_ONLY"):
                with m.If(self.bus.areset_n == 0):
                    m.next = "RESET"
                with m.Else():
                    m.d.comb += self.bus.awready.eq(1)

                    with m.If(self.bus.awvalid == 1):
                        m.d.sync += awaddr.eq(self.bus.awaddr)
                        m.next = "BOTH_CAPTURED"

            with m.State("BOTH_CAPTURED"):
                with m.If(self.bus.areset_n == 0):
                    m.next = "RESET"
                with m.Else():
                    m.d.comb += self.reg_file.we.eq(1)
                    m.next = "RESPONDING"

            with m.State("RESPONDING"):
                with m.If(self.bus.areset_n == 0):
                    m.next = "RESET"
                with m.Else():
                    m.d.comb += self.bus.bvalid.eq(1)

                    with m.If(self.bus.bready == 1):
                        m.next = "IDLE"

        # Read handling
        rdata = Signal.like(self.bus.rdata)

        m.d.comb += self.reg_file.raddr.eq(self.bus.araddr)
        m.d.comb += self.bus.rdata.eq(rdata)
        m.d.comb += self.bus.rresp.eq(AXIResponse.OKAY)

        with m.FSM(init="RESET", name="read_fsm"):
            with m.State("RESET"):
                with m.If(self.bus.areset_n == 1):
                    m.next = "IDLE"

            with m.State("IDLE"):
                with m.If(self.bus.areset_n == 0):
                    m.next = "RESET"
                with m.Else():
                    m.d.comb += self.bus.arready.eq(1)

                    # The register file latches the addressed value in the
                    # handshake cycle, so the address need not be kept.
                    with m.If(self.bus.arvalid == 1):
                        m.d.comb += self.reg_file.re.eq(1)
                        m.next = "ADDR_CAPTURED"

            with m.State("ADDR_CAPTURED"):
                with m.If(self.bus.areset_n == 0):
                    m.next = "RESET"
                with m.Elif(self.reg_file.rvalid == 1):
                    m.d.sync += rdata.eq(self.reg_file.rdata)
                    m.next = "DATA_VALID"

            with m.State("DATA_VALID"):
                with m.If(self.bus.areset_n == 0):
                    m.next = "RESET"
                with m.Else():
                    m.d.comb += self.bus.rvalid.eq(1)

                    with m.If(self.bus.rready == 1):
                        m.next = "IDLE"

        return m
