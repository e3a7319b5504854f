from amaranth import Fragment

from axil_periph.axi import AXIResponse
from axil_periph.axi_sim import TWrite, TRead, axi_write, axi_read, axi_reset, run_simulation
from axil_periph.reg_file import CONTROL_REG, DATA_REG, STATUS_REG, RESERVED_REG
from axil_periph.seven_seg import SEGMENT_TABLE
from axil_periph.top import Peripheral

REGS = [ CONTROL_REG, DATA_REG, STATUS_REG, RESERVED_REG ]

def make_dut(**kwargs):
    kwargs.setdefault("debounce_threshold", 4)
    kwargs.setdefault("refresh_divider", 2)
    return Peripheral(**kwargs)

async def pulse_int(ctx, dut, cycles=20):
    ctx.set(dut.int_in, 1)
    await ctx.tick().repeat(cycles)
    ctx.set(dut.int_in, 0)
    await ctx.tick().repeat(cycles)

def test_scenario():
    dut = make_dut()
    bus = dut.bus

    async def testbench(ctx):
        await axi_reset(ctx, bus)
        assert ctx.get(dut.irq) == 0
        await axi_read(ctx, bus, [
            TRead(addr, exp_resp=AXIResponse.OKAY, exp_data=0) for addr in REGS
        ], assert_on_error=True)

        await axi_write(ctx, bus, [ TWrite(CONTROL_REG, 0x00000005, wstrb=0xf) ], assert_on_error=True)
        await axi_read(ctx, bus, [ TRead(CONTROL_REG, exp_data=0x00000005) ], assert_on_error=True)

        await pulse_int(ctx, dut)
        assert ctx.get(dut.irq) == 1
        await axi_read(ctx, bus, [ TRead(STATUS_REG, exp_data=0x00000001) ], assert_on_error=True)

        await axi_write(ctx, bus, [ TWrite(STATUS_REG, 0x00000001, wstrb=0x1) ], assert_on_error=True)
        await axi_read(ctx, bus, [ TRead(STATUS_REG, exp_data=0x00000000) ], assert_on_error=True)
        assert ctx.get(dut.irq) == 0

    run_simulation(dut, testbench)

def test_irq_follows_status_bit():
    threshold = 4
    dut = make_dut(debounce_threshold=threshold)
    bus = dut.bus

    async def testbench(ctx):
        await axi_reset(ctx, bus)

        ctx.set(dut.int_in, 1)
        # synchronizer, debounce, edge detect, status register
        latency = 2 + threshold + 1 + 1
        for _ in range(0, latency - 1):
            await ctx.tick()
            assert ctx.get(dut.irq) == 0
        await ctx.tick()
        assert ctx.get(dut.irq) == 1

        # a level, not a pulse
        await ctx.tick().repeat(50)
        assert ctx.get(dut.irq) == 1

        # cleared while the input is still high: no new interrupt
        await axi_write(ctx, bus, [ TWrite(STATUS_REG, 0x1) ], assert_on_error=True)
        assert ctx.get(dut.irq) == 0
        await ctx.tick().repeat(50)
        assert ctx.get(dut.irq) == 0

        # short glitches are ignored
        ctx.set(dut.int_in, 0)
        await ctx.tick().repeat(20)
        for _ in range(0, 10):
            ctx.set(dut.int_in, 1)
            await ctx.tick().repeat(threshold - 1)
            ctx.set(dut.int_in, 0)
            await ctx.tick().repeat(threshold - 1)
        await ctx.tick().repeat(20)
        assert ctx.get(dut.irq) == 0
        await axi_read(ctx, bus, [ TRead(STATUS_REG, exp_data=0) ], assert_on_error=True)

        # the next clean edge sets it again
        await pulse_int(ctx, dut)
        assert ctx.get(dut.irq) == 1

    run_simulation(dut, testbench)

def test_leds_and_display():
    dut = make_dut(num_leds=4, refresh_divider=1)
    bus = dut.bus

    async def testbench(ctx):
        await axi_reset(ctx, bus)
        assert ctx.get(dut.leds) == 0

        await axi_write(ctx, bus, [
            TWrite(CONTROL_REG, 0xFFFFFFF6),
            TWrite(DATA_REG, 0xFFFF4321),
        ], assert_on_error=True)
        await ctx.tick()
        assert ctx.get(dut.leds) == 0x6

        seen = {}
        for _ in range(0, 8):
            seen[ctx.get(dut.digit)] = ctx.get(dut.segments)
            await ctx.tick()
        assert seen == {
            0b0001: SEGMENT_TABLE[1],
            0b0010: SEGMENT_TABLE[2],
            0b0100: SEGMENT_TABLE[3],
            0b1000: SEGMENT_TABLE[4],
        }

    run_simulation(dut, testbench)

def test_reset_clears_everything():
    dut = make_dut()
    bus = dut.bus

    async def testbench(ctx):
        await axi_reset(ctx, bus)

        await axi_write(ctx, bus, [
            TWrite(CONTROL_REG, 0xF),
            TWrite(DATA_REG, 0x1234),
            TWrite(RESERVED_REG, 0xFFFFFFFF),
        ], assert_on_error=True)
        await pulse_int(ctx, dut)
        await ctx.tick()
        assert ctx.get(dut.irq) == 1
        assert ctx.get(dut.leds) == 0xF

        await axi_reset(ctx, bus)
        assert ctx.get(dut.irq) == 0
        assert ctx.get(dut.leds) == 0
        await axi_read(ctx, bus, [
            TRead(addr, exp_data=0) for addr in REGS
        ], assert_on_error=True)

    run_simulation(dut, testbench)

def test_base_address():
    dut = make_dut(base_addr=0x40000000)
    bus = dut.bus

    async def testbench(ctx):
        await axi_reset(ctx, bus)
        await axi_write(ctx, bus, [ TWrite(0x40000000, 0x3) ], assert_on_error=True)
        await axi_read(ctx, bus, [
            TRead(0x40000000, exp_data=0x3),
            TRead(0x00000000, exp_data=0xDEADBEEF),
        ], assert_on_error=True)

    run_simulation(dut, testbench)

def test_debounce_from_clock():
    dut = Peripheral(clk_freq=1e6, debounce_time=5e-6)
    Fragment.get(dut, None)
    assert dut.int_cond.threshold == 5
    assert dut.seven_seg.divider == 1000
