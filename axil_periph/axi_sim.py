import random
from amaranth.sim import Simulator
from . import axi

class TWrite:
    """Class representing an AXI4-Lite write transaction.

    addr -- Destination address. Must be 32 bit aligned.
    data -- Data to write (32 bit).
    wstrb -- Write strobe. Either 'auto' (all four byte lanes) or an explicit
        4 bit mask. 0 gives a transaction that the slave should ignore.
    exp_resp -- Expected response (AXIResponse or None). If None, any response
        from the slave is accepted.
    """
    def __init__(self, addr, data, wstrb='auto', exp_resp=None):
        # allow aligned writes only
        if addr % 4 != 0:
            raise RuntimeError("write must be aligned")

        if wstrb == 'auto':
            wstrb = 0xf
        elif type(wstrb) != int or not (0 <= wstrb <= 0xf):
            raise RuntimeError("wstrb must be 'auto' or a 4 bit mask")

        if not (0 <= data < 2**32):
            raise RuntimeError("data must fit into 32 bits")

        self.addr = addr
        self.data = data
        self.wstrb = wstrb
        self.exp_resp = exp_resp

def _get_delay(delay, channels, ty):
    if delay == 'rand':
        return random.randrange(5)
    elif type(delay) == tuple:
        return delay[channels.index(ty)]
    else:
        return delay

async def axi_write(ctx, axi_bus, transact, delay=0, assert_on_error=False, timeout=None):
    """Simulated AXI4-Lite master performing one or more write transactions.

    ctx -- simulator context of the calling testbench
    axi_bus -- AXI bus (AXILiteBus)
    transact -- list of write transactions (TWrite)
    delay -- Delay (in ticks). See below.
    assert_on_error -- assert if incorrect behavior from the slave is detected.
    timeout -- if not None, abort after this number of cycles.

    Note that aborting due to timeout will possibly leave the slave in an
    ongoing transaction. It is then required to perform an AXI reset.

    The three AXI channels involved in a write transaction (write address,
    write data, write response) are independent, each with its own flow
    control. No ordering is enforced by the simulated master. The delay by the
    master is controlled by the delay parameter (in clock ticks). It can be a
    single number, a tuple of three numbers (one for each channel) or 'rand',
    in which case a random delay is chosen (independent for each channel and
    each transaction).

    Returns the list of responses received.
    """
    channels = ('a', 'd', 'b')

    a_delay = _get_delay(delay, channels, 'a')
    d_delay = _get_delay(delay, channels, 'd')
    b_delay = _get_delay(delay, channels, 'b')

    addr_i = 0
    data_i = 0
    resp = []

    cnt = 0
    while len(resp) < len(transact):
        if a_delay == 0 and addr_i < len(transact):
            ctx.set(axi_bus.awaddr, transact[addr_i].addr)
            ctx.set(axi_bus.awprot, axi.AXIProt.UNPRIV | axi.AXIProt.SECURE | axi.AXIProt.DATA)
            ctx.set(axi_bus.awvalid, 1)
        elif a_delay > 0:
            a_delay -= 1

        if d_delay == 0 and data_i < len(transact):
            ctx.set(axi_bus.wdata, transact[data_i].data)
            ctx.set(axi_bus.wstrb, transact[data_i].wstrb)
            ctx.set(axi_bus.wvalid, 1)
        elif d_delay > 0:
            d_delay -= 1

        if b_delay == 0:
            ctx.set(axi_bus.bready, 1)
        else:
            b_delay -= 1

        _, _, awvalid, awready, wvalid, wready, bvalid, bready, bresp = \
            await ctx.tick().sample(axi_bus.awvalid, axi_bus.awready,
                                    axi_bus.wvalid, axi_bus.wready,
                                    axi_bus.bvalid, axi_bus.bready, axi_bus.bresp)
        cnt += 1

        if awvalid and awready:
            ctx.set(axi_bus.awvalid, 0)
            a_delay = _get_delay(delay, channels, 'a')
            addr_i += 1

        if wvalid and wready:
            ctx.set(axi_bus.wvalid, 0)
            d_delay = _get_delay(delay, channels, 'd')
            data_i += 1

        if bvalid and bready:
            ctx.set(axi_bus.bready, 0)

            exp_resp = transact[len(resp)].exp_resp
            if exp_resp != None:
                if bresp != int(exp_resp):
                    print("Bad response: got=%d, exp=%s" % (bresp, repr(exp_resp)))
                    assert(not assert_on_error)
            resp.append(axi.AXIResponse(bresp))
            b_delay = _get_delay(delay, channels, 'b')

        if timeout != None and cnt >= timeout:
            break

    return resp

class TRead:
    """Class representing an AXI4-Lite read transaction.

    addr -- Source address. Must be 32 bit aligned.
    exp_resp -- Expected read response, or None to accept any response.
    exp_data -- Expected data to be returned from read, or None to not check
        the data.
    """
    def __init__(self, addr, exp_resp=None, exp_data=None):
        # allow aligned reads only
        if addr % 4 != 0:
            raise RuntimeError("Read must be aligned")

        self.addr = addr
        self.exp_resp = exp_resp
        self.exp_data = exp_data

async def axi_read(ctx, axi_bus, transact, delay=0, assert_on_error=False, timeout=None):
    """Simulated AXI4-Lite master performing one or more read transactions.

    ctx -- simulator context of the calling testbench
    axi_bus -- AXI bus (AXILiteBus)
    transact -- list of read transactions (TRead)
    delay -- Delay (in ticks). See below.
    assert_on_error -- assert if incorrect behavior from the slave is detected.
    timeout -- if not None, abort after this number of cycles.

    The two AXI channels involved in a read transaction (read address, read
    data) are independent, each with its own flow control. No ordering is
    enforced by the simulated master. The delay by the master is controlled by
    the delay parameter (in clock ticks). It can be a single number, a tuple of
    two numbers (one for each channel) or 'rand', in which case a random delay
    is chosen (independent for each channel and each transaction).

    Returns the list of data words read.
    """
    channels = ('a', 'r')

    a_delay = _get_delay(delay, channels, 'a')
    r_delay = _get_delay(delay, channels, 'r')

    addr_i = 0
    data = []

    cnt = 0
    while len(data) < len(transact):
        if a_delay == 0 and addr_i < len(transact):
            ctx.set(axi_bus.araddr, transact[addr_i].addr)
            ctx.set(axi_bus.arprot, axi.AXIProt.UNPRIV | axi.AXIProt.SECURE | axi.AXIProt.DATA)
            ctx.set(axi_bus.arvalid, 1)
        elif a_delay > 0:
            a_delay -= 1

        if r_delay == 0:
            ctx.set(axi_bus.rready, 1)
        else:
            r_delay -= 1

        _, _, arvalid, arready, rvalid, rready, rresp, rdata = \
            await ctx.tick().sample(axi_bus.arvalid, axi_bus.arready,
                                    axi_bus.rvalid, axi_bus.rready,
                                    axi_bus.rresp, axi_bus.rdata)
        cnt += 1

        if arvalid and arready:
            ctx.set(axi_bus.arvalid, 0)
            a_delay = _get_delay(delay, channels, 'a')
            addr_i += 1

        if rvalid and rready:
            ctx.set(axi_bus.rready, 0)

            t = transact[len(data)]
            if t.exp_resp != None:
                if rresp != int(t.exp_resp):
                    print("Bad response: got=%d, exp=%s" % (rresp, repr(t.exp_resp)))
                    assert(not assert_on_error)

            if t.exp_data != None:
                if rdata != t.exp_data:
                    print("Bad data @0x%x: got=0x%x, exp=0x%x" % (t.addr, rdata, t.exp_data))
                    assert(not assert_on_error)

            data.append(rdata)
            r_delay = _get_delay(delay, channels, 'r')

        if timeout != None and cnt >= timeout:
            break

    return data

async def axi_reset(ctx, axi_bus, cycles=2):
    """Hold the AXI reset (areset_n low) for a number of cycles and release it.
    All master-driven valid/ready signals are deasserted."""
    for s in (axi_bus.awvalid, axi_bus.wvalid, axi_bus.bready, axi_bus.arvalid, axi_bus.rready):
        ctx.set(s, 0)
    ctx.set(axi_bus.areset_n, 0)
    await ctx.tick().repeat(cycles)
    ctx.set(axi_bus.areset_n, 1)
    await ctx.tick()

def run_simulation(dut, testbench, vcd_file=None, clk_period=1e-6):
    """Run an async testbench against dut, clocked with clk_period, optionally
    dumping a VCD trace."""
    sim = Simulator(dut)
    sim.add_clock(clk_period)
    sim.add_testbench(testbench)

    if vcd_file is not None:
        with sim.write_vcd(vcd_file):
            sim.run()
    else:
        sim.run()
