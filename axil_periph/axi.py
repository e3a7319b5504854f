from amaranth import *

from enum import IntEnum

class AXIResponse(IntEnum):
    OKAY   = 0b00
    EXOKAY = 0b01
    SLVERR = 0b10
    DECERR = 0b11

class AXIProt:
    UNPRIV     = 0b000
    PRIV       = 0b001
    SECURE     = 0b000
    NON_SECURE = 0b010
    DATA       = 0b000
    INSTR      = 0b100

class AXILiteBus:
    """AXI4-Lite bus (single beat, no IDs, no bursts).

    The slave drives the ready signals of the request channels and the
    valid/payload signals of the response channels; the master drives
    everything else. areset_n is the active-low bus reset.
    """
    def __init__(self, addr_bits=32, data_bits=32, name="axi"):
        if data_bits not in (32, 64):
            raise ValueError("AXI4-Lite data width must be 32 or 64, not {}".format(data_bits))

        self.addr_bits = addr_bits
        self.data_bits = data_bits

        def sig(field, width, **kwargs):
            return Signal(width, name="{}_{}".format(name, field), **kwargs)

        # reset
        self.areset_n = sig("areset_n", 1)

        # write address channel
        self.awaddr  = sig("awaddr", addr_bits)
        self.awprot  = sig("awprot", 3)
        self.awvalid = sig("awvalid", 1)
        self.awready = sig("awready", 1)

        # write data channel
        self.wdata  = sig("wdata", data_bits)
        self.wstrb  = sig("wstrb", data_bits//8)
        self.wvalid = sig("wvalid", 1)
        self.wready = sig("wready", 1)

        # write response channel
        self.bresp  = sig("bresp", 2)
        self.bvalid = sig("bvalid", 1)
        self.bready = sig("bready", 1)

        # read address channel
        self.araddr  = sig("araddr", addr_bits)
        self.arprot  = sig("arprot", 3)
        self.arvalid = sig("arvalid", 1)
        self.arready = sig("arready", 1)

        # read data channel
        self.rdata  = sig("rdata", data_bits)
        self.rresp  = sig("rresp", 2)
        self.rvalid = sig("rvalid", 1)
        self.rready = sig("rready", 1)

    def master_signals(self):
        return [
            self.areset_n,
            self.awaddr, self.awprot, self.awvalid,
            self.wdata, self.wstrb, self.wvalid,
            self.bready,
            self.araddr, self.arprot, self.arvalid,
            self.rready,
        ]

    def slave_signals(self):
        return [
            self.awready,
            self.wready,
            self.bresp, self.bvalid,
            self.arready,
            self.rdata, self.rresp, self.rvalid,
        ]

    def fields(self):
        return self.master_signals() + self.slave_signals()
