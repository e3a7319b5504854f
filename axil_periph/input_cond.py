from amaranth import *

def debounce_cycles(clk_freq, debounce_time):
    """Number of clock cycles an input has to be stable for, given the clock
    frequency (Hz) and the debounce time (s)."""
    if clk_freq < 0 or debounce_time < 0:
        raise ValueError("Clock frequency and debounce time must not be negative")
    return round(clk_freq * debounce_time)

class InputConditioner(Elaboratable):
    """Input conditioner for an asynchronous digital input.

    The input i is synchronized to the `sync' clock through a chain of
    `stages' flip-flops, then debounced: the debounced level (stable) only
    follows the synchronized input once the two have differed for
    `threshold' consecutive cycles. Shorter disagreements restart the count.
    Each rising edge of the debounced level produces a single-cycle pulse on
    o.

    With threshold=0 the debounce filter is bypassed and stable is simply the
    synchronized input delayed by one cycle.
    """
    def __init__(self, threshold, stages=2):
        if threshold < 0:
            raise ValueError("Debounce threshold must not be negative, not {}".format(threshold))
        if stages < 1:
            raise ValueError("Synchronizer needs at least one stage, not {}".format(stages))

        self.threshold = threshold
        self.stages = stages

        self.i = Signal()
        self.o = Signal()
        self.stable = Signal()

    def latency(self):
        """Cycles from a clean rising edge on i to the pulse on o."""
        return self.stages + max(self.threshold, 1) + 1

    def elaborate(self, platform):
        m = Module()

        # Synchronizer
        sync_ff = [ Signal(name="sync_ff{}".format(n)) for n in range(0, self.stages) ]
        m.d.sync += sync_ff[0].eq(self.i)
        for n in range(1, self.stages):
            m.d.sync += sync_ff[n].eq(sync_ff[n-1])
        i_sync = sync_ff[-1]

        # Debounce
        if self.threshold == 0:
            m.d.sync += self.stable.eq(i_sync)
        else:
            cnt = Signal(range(self.threshold + 1))

            with m.If(i_sync == self.stable):
                m.d.sync += cnt.eq(0)
            with m.Elif(cnt + 1 == self.threshold):
                m.d.sync += self.stable.eq(i_sync)
                m.d.sync += cnt.eq(0)
            with m.Else():
                m.d.sync += cnt.eq(cnt + 1)

        # Edge detection
        stable_last = Signal()
        m.d.sync += stable_last.eq(self.stable)
        m.d.sync += self.o.eq(self.stable & ~stable_last)

        return m
