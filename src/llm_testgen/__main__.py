from llm_testgen.cli import main

main()
